# insight_engine/services/analysis_service.py
import asyncio
import logging
from functools import partial
from typing import Callable, Dict, List, Sequence, Tuple

from insight_engine.exceptions import ExtractionError, FetchError, UnsupportedTickerError
from insight_engine.helpers.aggregator import aggregate_chunk_scores
from insight_engine.helpers.chunker import DEFAULT_MAX_CHARS, split_text_into_chunks
from insight_engine.helpers.dimensions import GROWTH, TRUST, Dimension
from insight_engine.helpers.scorer import score_chunk
from insight_engine.helpers.summarizer import DEFAULT_MAX_JUSTIFICATIONS, summarize_insights
from insight_engine.schemas.analysis import AggregateResult, AnalysisResponse, SummaryResult
from insight_engine.services.pdf_extractor import extract_text_from_pdf
from insight_engine.services.run_logger import RunLogger

logger = logging.getLogger(__name__)


class AnalysisService:
    """
    Run the full analysis for one ticker and its uploaded reports.

    This service:
    - Extracts text from the uploaded PDFs
    - Fetches the ticker's registered web pages
    - Scores report text for Trust and web text for Growth, chunk by chunk
    - Summarizes each dimension into a justification and recommendations
    - Records every step in the run's audit log
    """

    def __init__(
        self,
        llm,
        fetcher,
        run_logger: RunLogger,
        ticker_urls: Dict[str, List[str]],
        chunk_max_chars: int = DEFAULT_MAX_CHARS,
        summary_max_justifications: int = DEFAULT_MAX_JUSTIFICATIONS,
        extract_text: Callable[[bytes], str] = extract_text_from_pdf,
    ):
        self.llm = llm
        self.fetcher = fetcher
        self.run_logger = run_logger
        self.ticker_urls = {t.upper(): urls for t, urls in ticker_urls.items()}
        self.chunk_max_chars = chunk_max_chars
        self.summary_max_justifications = summary_max_justifications
        self.extract_text = extract_text

    def _log(self, run_id: str, message: str) -> None:
        self.run_logger.append_line(run_id, message)

    def resolve_urls(self, ticker: str, run_id: str) -> List[str]:
        """
        Look up the source URLs registered for a ticker.

        Raises:
            UnsupportedTickerError: If the ticker is not registered
        """
        urls = self.ticker_urls.get(ticker.upper())
        if not urls:
            self._log(run_id, f"Unsupported ticker: {ticker}")
            raise UnsupportedTickerError(ticker)
        return urls

    async def extract_documents(self, documents: Sequence[bytes], run_id: str) -> str:
        """
        Extract and join the text of every document.

        Raises:
            ExtractionError: On the first document that cannot be read
        """
        self._log(run_id, f"Beginning PDF extraction for {len(documents)} file(s)")
        # PyMuPDF parsing is blocking, keep it off the event loop
        loop = asyncio.get_running_loop()
        texts = []
        for i, data in enumerate(documents, 1):
            try:
                text = await loop.run_in_executor(None, self.extract_text, data)
            except ExtractionError as e:
                self._log(run_id, f"Error extracting PDF file {i}: {e}")
                raise
            self._log(run_id, f"Extracted PDF file {i}: {len(text)} chars")
            texts.append(text)

        combined = "\n\n".join(texts)
        self._log(run_id, f"Combined PDF text length: {len(combined)} chars")
        return combined

    async def fetch_sources(self, urls: Sequence[str], run_id: str) -> str:
        """Fetch every URL, skipping the ones that fail, and join the text."""
        self._log(run_id, f"Beginning scraping of {len(urls)} URL(s)")
        texts = []
        for i, url in enumerate(urls, 1):
            self._log(run_id, f"Scraping URL {i}: {url}")
            try:
                text = await self.fetcher.fetch(url)
            except FetchError as e:
                self._log(run_id, f"Error scraping URL {i}: {e}")
                logger.warning(f"Skipping {url}: {e}")
                continue
            self._log(run_id, f"Scraped URL {i}: {len(text)} chars")
            if text:
                texts.append(text)

        combined = "\n\n".join(texts)
        self._log(run_id, f"Combined scraped text length: {len(combined)} chars")
        return combined

    async def run_dimension(
        self, dimension: Dimension, text: str, run_id: str
    ) -> Tuple[AggregateResult, SummaryResult]:
        """Chunk, score, aggregate and summarize one dimension."""
        chunks = split_text_into_chunks(text, self.chunk_max_chars)

        self._log(
            run_id,
            f"Beginning {dimension.label} scoring ({dimension.aspect}) over {len(chunks)} chunk(s)",
        )
        aggregate = await aggregate_chunk_scores(
            chunks,
            partial(score_chunk, self.llm, dimension),
            run_logger=self.run_logger,
            run_id=run_id,
            phase=dimension.key,
        )
        self._log(run_id, f"Completed {dimension.label} scoring: score={aggregate.score}")

        self._log(run_id, f"Beginning {dimension.label} summarization")
        summary = await summarize_insights(
            self.llm,
            dimension,
            aggregate.score,
            aggregate.justifications,
            run_logger=self.run_logger,
            run_id=run_id,
            max_justifications=self.summary_max_justifications,
        )
        return aggregate, summary

    async def analyze(
        self, ticker: str, documents: Sequence[bytes], run_id: str
    ) -> AnalysisResponse:
        """
        Main entry point: extract, fetch, score and summarize.

        Args:
            ticker: Company ticker (case-insensitive)
            documents: Raw PDF buffers
            run_id: Identity of this run's audit log

        Returns:
            AnalysisResponse

        Raises:
            UnsupportedTickerError: Before any extraction or model call
            ExtractionError: If any document cannot be read
        """
        ticker = ticker.upper()
        self._log(run_id, f"Starting analysis for ticker={ticker}")
        urls = self.resolve_urls(ticker, run_id)

        report_text = await self.extract_documents(documents, run_id)
        web_text = await self.fetch_sources(urls, run_id)

        trust, trust_summary = await self.run_dimension(TRUST, report_text, run_id)
        growth, growth_summary = await self.run_dimension(GROWTH, web_text, run_id)

        summary_line = f"For {ticker}: Trust={trust.score}, Growth={growth.score}."
        self._log(run_id, f"Summary: {summary_line}")
        self._log(run_id, "Analysis completed successfully")
        logger.info(f"Run {run_id} complete - {summary_line}")

        return AnalysisResponse(
            ticker=ticker,
            trust_score=trust.score,
            trust_justification=trust_summary.overall_justification,
            trust_recommendations=trust_summary.recommendations,
            growth_score=growth.score,
            growth_justification=growth_summary.overall_justification,
            growth_recommendations=growth_summary.recommendations,
            summary=summary_line,
            run_id=run_id,
        )
