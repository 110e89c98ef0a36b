"""Lambda handler that runs the bundled unique port executable."""
