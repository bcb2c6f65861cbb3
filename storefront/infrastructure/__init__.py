"""Infrastructure: Firebase REST clients and the gateway implementations."""
