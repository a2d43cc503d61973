"""
launchwrap - JVM launch-line translator and process-tree supervisor.

Accepts a JVM-style command line (optionally with @argfile indirection),
normalizes it into a LaunchConfiguration and runs it through a plain JVM,
Maven (exec or Micronaut) or Gradle launch, tearing down the whole process
tree on cancellation.
"""

__version__ = "0.4.0"

# Re-export core models for convenience
from launchwrap.core.config.models import DebugSettings, LaunchConfiguration, LauncherSettings

__all__ = ["DebugSettings", "LaunchConfiguration", "LauncherSettings", "__version__"]
