from .installer import DeploymentInstaller, platform_library_names

__all__ = [
    "DeploymentInstaller",
    "platform_library_names",
]
