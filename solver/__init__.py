"""Formula resolution: model, front end, resolver and presentation."""
