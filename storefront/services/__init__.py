"""Records access, domain services and collaborator interfaces."""
