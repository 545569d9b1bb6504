"""Summary and keyword generation for uploaded files."""

import re
from pathlib import PurePath
from typing import List, Optional

from common.logging_config import get_logger
from fileservice.llm_utils import parse_string_array
from fileservice.ranking_client import TextRankingClient

logger = get_logger(__name__)

BASIC_SUMMARIES = {
    ".pdf": "PDF document that may contain reports, documentation, or reference material.",
    ".docx": "Microsoft Word document containing text, formatting, and possibly images.",
    ".xlsx": "Excel spreadsheet with data, calculations, or charts.",
    ".pptx": "PowerPoint presentation with slides and visual content.",
    ".jpg": "Image file that may contain photos, diagrams, or visual content.",
    ".png": "Image file with graphics, screenshots, or illustrations.",
    ".mp4": "Video file containing multimedia content.",
    ".zip": "Compressed archive containing multiple files or folders.",
}

MAX_KEYWORD_LENGTH = 50
MAX_SUGGESTIONS = 5
MIN_SUGGESTIONS = 3

SUGGESTION_FILE_TYPES = ("pdf", "doc", "image", "video", "excel", "powerpoint", "text", "archive")
SUGGESTION_COMMON_TERMS = (
    "document", "report", "presentation", "spreadsheet", "contract", "invoice", "template", "backup"
)


def basic_summary(file_name: str, content_type: str) -> str:
    extension = PurePath(file_name).suffix.lower()
    return BASIC_SUMMARIES.get(
        extension,
        f"File of type {content_type} that may be useful for reference or work purposes."
    )


def basic_keywords(file_name: str, description: Optional[str], content_type: str) -> List[str]:
    keywords: List[str] = []
    path = PurePath(file_name)

    extension = path.suffix.lstrip('.').lower()
    if extension:
        keywords.append(extension)

    if content_type.startswith("image/"):
        keywords.append("image")
    elif content_type.startswith("video/"):
        keywords.append("video")
    elif content_type.startswith("audio/"):
        keywords.append("audio")
    elif "pdf" in content_type:
        keywords.append("document")
    elif "text" in content_type:
        keywords.append("text")

    name_words = [w for w in re.split(r'[ _\-.]+', path.stem) if len(w) > 2]
    keywords.extend(name_words[:5])

    if description:
        desc_words = [w for w in re.split(r'[ ,.;]+', description) if len(w) > 3]
        keywords.extend(desc_words[:5])

    return list(dict.fromkeys(keywords))


def basic_suggestions(query: str) -> List[str]:
    """
    Completions for a partial query from known file types and business
    terms, plus phrasings of the query itself once it is longer than two
    characters.
    """
    needle = query.lower()
    suggestions = [f"{t} files" for t in SUGGESTION_FILE_TYPES if t.startswith(needle)]
    suggestions.extend(t for t in SUGGESTION_COMMON_TERMS if t.startswith(needle))

    if len(needle) > 2:
        suggestions.append(f"files containing '{query}'")
        suggestions.append(f"recent {query}")
        suggestions.append(f"shared {query}")

    return list(dict.fromkeys(suggestions))[:MAX_SUGGESTIONS]


def clean_keywords(keywords: List[str]) -> List[str]:
    cleaned = [k.strip().lower() for k in keywords if k and k.strip()]
    return list(dict.fromkeys(k for k in cleaned if 1 < len(k) < MAX_KEYWORD_LENGTH))


class AiMetadataService:
    """
    Produces ai_summary / ai_keywords for a file. Falls back to heuristics
    derived from the name and MIME type whenever the collaborator is
    unconfigured or fails.
    """

    def __init__(self, ranking_client: Optional[TextRankingClient] = None):
        self.ranking_client = ranking_client

    @property
    def ai_enabled(self) -> bool:
        return self.ranking_client is not None and self.ranking_client.configured

    async def generate_summary(self, file_name: str, content_type: str) -> str:
        if not self.ai_enabled:
            return basic_summary(file_name, content_type)

        prompt = (
            "Generate a concise summary for a file with the following details:\n"
            f"- File Name: {file_name}\n"
            f"- Content Type: {content_type}\n\n"
            "Based on the file name and type, provide a 1-2 sentence summary describing what this "
            "file likely contains or what it might be used for.\n"
            "Be specific and helpful for search purposes.\n"
        )
        try:
            summary = await self.ranking_client.complete(prompt)
        except Exception as e:
            logger.warning(f"Error generating AI summary for file {file_name}: {e}")
            return basic_summary(file_name, content_type)

        logger.info(f"AI summary generated for file: {file_name}")
        return summary or basic_summary(file_name, content_type)

    async def extract_keywords(self, file_name: str, description: Optional[str], content_type: str) -> List[str]:
        if not self.ai_enabled:
            return basic_keywords(file_name, description, content_type)

        prompt = (
            "Extract relevant keywords for search purposes from the following file information:\n"
            f"- File Name: {file_name}\n"
            f"- Description: {description or 'No description'}\n"
            f"- Content Type: {content_type}\n\n"
            "Return 5-10 relevant keywords that would help users find this file.\n"
            "Return the keywords as a JSON array of strings.\n"
        )
        try:
            keywords = clean_keywords(parse_string_array(await self.ranking_client.complete(prompt)))
        except Exception as e:
            logger.warning(f"Error extracting AI keywords for file {file_name}: {e}")
            return basic_keywords(file_name, description, content_type)

        if not keywords:
            return basic_keywords(file_name, description, content_type)

        logger.info(f"AI keywords extracted for file {file_name}: {len(keywords)} keywords")
        return keywords

    async def generate_suggestions(self, query: str) -> List[str]:
        """
        Up to five completed search queries for a partial query.

        Collaborator suggestions come first; basic suggestions top the list
        up when fewer than three usable ones come back. Queries shorter than
        two characters get no suggestions.
        """
        query = (query or "").strip()
        if len(query) < 2:
            return []

        suggestions: List[str] = []
        if self.ai_enabled:
            prompt = (
                f"Given this partial search query: \"{query}\"\n\n"
                "Suggest 3-5 complete search queries that a user might be looking for when searching files.\n"
                "Consider common file types, development terms, document types, and business contexts.\n\n"
                "Return suggestions as a JSON array of strings.\n"
                "Each suggestion should be a complete, useful search query.\n"
            )
            try:
                completion = await self.ranking_client.complete(prompt)
                suggestions = [s.strip() for s in parse_string_array(completion) if s.strip()]
                logger.info(f"Search suggestions generated for query: {query}")
            except Exception as e:
                logger.warning(f"Error generating search suggestions for query {query}: {e}")

        if len(suggestions) < MIN_SUGGESTIONS:
            suggestions.extend(s for s in basic_suggestions(query) if s not in suggestions)

        return list(dict.fromkeys(suggestions))[:MAX_SUGGESTIONS]
