"""Pure scheduling logic shared by services, routes and tests."""
