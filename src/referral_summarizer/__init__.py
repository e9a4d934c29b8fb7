"""
Referral Summarizer

Multi-modal clinical document summarization: text, uploaded files, web pages
and medical images in; a bounded bullet-point referral summary out.
"""

__version__ = "0.1.0"
