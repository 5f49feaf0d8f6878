"""pytest support. Enable with `pytest_plugins = ["graphserver.testing.plugin"]`."""
