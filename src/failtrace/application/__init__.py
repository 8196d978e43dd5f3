"""Application layer: ports the engine consumes from the outside world."""
