"""
YouTube to Article - turn a video's captions into a translated article.

A small pipeline for:
- Fetching a YouTube video's caption track
- Parsing caption XML into timestamped 5-minute transcript blocks
- Splitting the transcript into token-bounded chunks
- Generating an HTML article chunk by chunk with OpenAI GPT
"""

__version__ = "0.1.0"
