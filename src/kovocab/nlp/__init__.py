"""kovocab NLP: syntax-analysis protocol and backends.

The Google backend lives in :mod:`kovocab.nlp.google` and is imported only
by :mod:`kovocab.clients`, so commands that need only the LLM never load the
Cloud client.
"""

from kovocab.nlp.mock import MockSyntaxAnalyzer
from kovocab.nlp.protocol import SyntaxAnalyzer, SyntaxToken

__all__ = ["SyntaxAnalyzer", "SyntaxToken", "MockSyntaxAnalyzer"]
