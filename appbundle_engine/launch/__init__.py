from .scripts import ScriptConfig, build_classpath, export_scripts, render_script

__all__ = [
    "ScriptConfig",
    "build_classpath",
    "export_scripts",
    "render_script",
]
