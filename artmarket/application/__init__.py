"""Application layer: use-case services, DTOs and collaborator interfaces."""
