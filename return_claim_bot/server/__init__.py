"""HTTP transport: FastAPI app hosting the Bolt request handler and health routes."""
