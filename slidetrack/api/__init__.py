"""HTTP surface: routers, schemas and error mapping."""
