"""kovocab: resumable enrichment pipelines for a ranked Korean vocabulary list.

Terms are lemmatized and tagged by an NLP service, then defined, audited,
corrected and translated by an LLM in bounded batches. Every batch is merged
into one JSON store and persisted before the next begins, so an interrupted
run resumes where it stopped.
"""

__version__ = "0.3.0"
