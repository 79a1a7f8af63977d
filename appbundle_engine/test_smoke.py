"""
Minimal smoke test for the engine structure.
Tests that basic imports and an end-to-end build/deploy work.
"""

from pathlib import Path


def test_imports():
    """Test that all basic imports work"""
    from appbundle_engine import BundleAssembler, DeploymentInstaller, merge_libraries
    from appbundle_engine.bundle import ArchivedApplicationDescriptor, BundleManifest, ManifestKey
    from appbundle_engine.launch import build_classpath, render_script
    from appbundle_cli.main import cli

    assert ManifestKey.HAM_FILE.value == "ham_file"
    assert callable(merge_libraries)
    assert cli.name == "cli"


def test_copy_build_and_deploy(tmp_path: Path):
    """Test a full bundle round trip with the copy compiler"""
    from appbundle_engine import BundleAssembler, BundleDescriptor, CopyCompiler, DeploymentInstaller, InstallPaths

    source = tmp_path / "src" / "hello.py"
    source.parent.mkdir(parents=True)
    source.write_text("print('hello')\n")

    descriptor = BundleDescriptor.model_validate(
        {"application_name": "Hello", "components": [{"classname": "hello", "source_dir": str(source.parent)}]}
    )
    bundle = BundleAssembler(CopyCompiler(), scratch_root=tmp_path / "scratch").assemble(descriptor, tmp_path)

    paths = InstallPaths(home_dir=tmp_path / "home")
    app_dir = DeploymentInstaller(paths).deploy(bundle)

    assert (app_dir / "hello" / "hello.jar").is_file()
    assert (app_dir / "Hello.ham").is_file()
