"""Business services: answer codec, survey engine, admin, analytics."""
