"""
Word Wizard - Vocabulary Lookup and Learning Engine

Request orchestration and quota-aware state engine for looking up words,
keeping a bounded learning history, processing batches of terms, and
forwarding results to Notion and Anki.
"""

__version__ = "1.0.0"
__author__ = "Word Wizard Contributors"
