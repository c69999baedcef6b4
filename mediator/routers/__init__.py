"""HTTP routers exposed by the mediator."""
