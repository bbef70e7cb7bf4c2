"""CLI tools for Schema Composer."""
