"""Command handlers and the registry that dispatches them."""