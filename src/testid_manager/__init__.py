"""testid-manager: sequential IDs for JavaScript/TypeScript test titles."""
