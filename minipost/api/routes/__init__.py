"""Route Modules — FastAPI routers registered explicitly in main.py."""
