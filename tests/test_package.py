"""Basic tests for the envlayer package."""


def test_import_envlayer():
    """Test that envlayer can be imported."""
    import envlayer

    assert hasattr(envlayer, "__version__")
    assert envlayer.__version__ == "0.1.0"


def test_version_format():
    """Test that version follows semver format."""
    import envlayer

    parts = envlayer.__version__.split(".")
    assert len(parts) == 3
    assert all(p.isdigit() for p in parts)


def test_public_api():
    """Test that the documented entry points are exported."""
    import envlayer

    for name in envlayer.__all__:
        assert hasattr(envlayer, name), name
