"""Application layer: DTOs and the gateway contract."""
