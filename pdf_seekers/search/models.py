"""
Data models for search functionality.

Defines the ranked hit returned by the search engine and the per-document
result metadata built by the context extractor.
"""

from dataclasses import asdict, dataclass, field
from typing import List


@dataclass
class SearchHit:
    """
    Represents a single ranked index document.

    Attributes:
        path: Source file path as stored in the index.
        page_nums: Every stored page number of the document, not only
                   the matching ones.
        contents: Stored page texts, parallel to page_nums.
        score: BM25 relevance score (lower is better in SQLite FTS5).
    """
    path: str
    page_nums: List[str] = field(default_factory=list)
    contents: List[str] = field(default_factory=list)
    score: float = 0.0

    @property
    def display_score(self) -> float:
        """
        Convert internal score to display-friendly value.

        FTS5 BM25 returns negative scores where more negative = better match.
        This converts to positive where higher = better.
        """
        return abs(self.score)


@dataclass
class PDFMetadata:
    """
    Search result for one document.

    Attributes:
        doc_name: Source file path.
        num_pages: Total page count of the source file.
        matched_page_nums: Pages confirmed to contain the keyword.
        cropped_texts: Keyword-in-context crop per matched page, parallel
                       to matched_page_nums.
    """
    doc_name: str
    num_pages: int
    matched_page_nums: List[int] = field(default_factory=list)
    cropped_texts: List[str] = field(default_factory=list)

    def add_match(self, page_num: int, cropped_text: str) -> None:
        self.matched_page_nums.append(page_num)
        self.cropped_texts.append(cropped_text)

    def show(self) -> str:
        """Render the human-readable report of this result."""
        lines = [
            f"Document: {self.doc_name}",
            f"Total pages: {self.num_pages}",
            f"Matched pages: {', '.join(str(n) for n in self.matched_page_nums) or '-'}",
        ]

        for page_num, text in zip(self.matched_page_nums, self.cropped_texts):
            lines.append(f"  [page {page_num}] {text}")

        return "\n".join(lines)

    def to_dict(self) -> dict:
        return asdict(self)


if __name__ == "__main__":
    hit = SearchHit(path="data/yolo.pdf", page_nums=["1", "2"], score=-3.2)
    print(f"Hit: {hit.path} (score: {hit.display_score:.2f})")

    metadata = PDFMetadata(doc_name="data/yolo.pdf", num_pages=2)
    metadata.add_match(2, "a single convolutional network predicts boxes")
    print(metadata.show())
