"""Services — request handlers and the dispatcher that routes to them."""
