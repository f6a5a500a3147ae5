"""Node mobility models on a discrete-event clock, with an ns-2 movement trace reader."""

__version__ = "0.1.0"