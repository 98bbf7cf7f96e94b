"""Lung CT scan analysis: Streamlit client and reference prediction service."""

__version__ = "0.1.0"
