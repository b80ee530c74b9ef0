"""pulso — feedback-to-report pipeline for NPS survey PDFs."""

__version__ = "0.1.0"
