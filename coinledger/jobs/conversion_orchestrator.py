"""Job-layer conversion orchestrator from brokerage export to ledger file."""

from __future__ import annotations

import io
import logging
import os
import stat
import tempfile
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path

from coinledger.domain import CoinLedgerError, InputFileNotFoundError, Trade
from coinledger.formatting import LedgerDatFormatter
from coinledger.ledger import FifoLotLedger, LedgerEntry, LotLedgerPort
from coinledger.parsing import TradeSourcePort

from .interfaces import JobExecutionResult, JobOrchestratorPort

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConversionOrchestratorConfig:
    """Configuration values for conversion orchestration execution.

    Attributes:
        input_path: Source export path.
        output_path: Target ledger path.
        trade_sort_enabled: Stable-sort trades by timestamp before lot matching.
    """

    input_path: str = "coinbase.csv"
    output_path: str = "ledger.dat"
    trade_sort_enabled: bool = False


@dataclass(frozen=True)
class ConversionResult:
    """Outcome of one complete conversion run.

    Attributes:
        entries: Ledger entries in input order.
        ledger_text: Rendered ledger document.
        trade_count: Trades processed.
        buy_count: Acquisitions processed.
        sell_count: Disposals processed.
        skipped_row_count: Source rows skipped by the parser.
        realized_gain_total: Realized gain summed across disposals.
        open_quantity: Asset quantity left in open lots.
        open_lot_count: Open lots left at end of run.
        lot_policy_name: Lot matching policy used for disposals.
    """

    entries: tuple[LedgerEntry, ...]
    ledger_text: str
    trade_count: int
    buy_count: int
    sell_count: int
    skipped_row_count: int
    realized_gain_total: Decimal
    open_quantity: Decimal
    open_lot_count: int
    lot_policy_name: str


class ConversionJobOrchestrator(JobOrchestratorPort):
    """Run parser, FIFO ledger, and formatter as one forward pipeline."""

    _CONVERSION_JOB_NAME = "conversion_run"

    def __init__(
        self,
        trade_reader_factory: Callable[[], TradeSourcePort],
        formatter: LedgerDatFormatter,
        config: ConversionOrchestratorConfig,
        ledger_factory: Callable[[], LotLedgerPort] = FifoLotLedger,
    ):
        """Initialize conversion orchestrator dependencies.

        Args:
            trade_reader_factory: Builds one fresh trade reader per run.
            formatter: Ledger text formatter.
            config: Conversion execution configuration.
            ledger_factory: Builds one fresh lot ledger per run.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when dependencies or config values are invalid.
        """

        if trade_reader_factory is None:
            raise ValueError("trade_reader_factory must not be None")
        if formatter is None:
            raise ValueError("formatter must not be None")
        if not config.input_path.strip():
            raise ValueError("config.input_path must not be blank")
        if not config.output_path.strip():
            raise ValueError("config.output_path must not be blank")

        self._trade_reader_factory = trade_reader_factory
        self._formatter = formatter
        self._config = config
        self._ledger_factory = ledger_factory

    def job_supported_names(self) -> tuple[str, ...]:
        """Return supported job names.

        Returns:
            tuple[str, ...]: Supported job names.

        Raises:
            RuntimeError: This implementation does not raise runtime errors.
        """

        return (self._CONVERSION_JOB_NAME,)

    def job_execute(self, job_name: str) -> JobExecutionResult:
        """Convert the configured input file into the configured output file.

        Args:
            job_name: Name of job to execute.

        Returns:
            JobExecutionResult: `success`, or `failed` with the error code and detail.

        Raises:
            ValueError: Raised when job name is unsupported.
        """

        normalized_job_name = job_name.strip()
        if normalized_job_name != self._CONVERSION_JOB_NAME:
            raise ValueError(f"unsupported job_name={normalized_job_name}")

        try:
            self.job_convert_file(input_path=self._config.input_path, output_path=self._config.output_path)
        except CoinLedgerError as error:
            logger.error("Conversion failed [%s]: %s", error.error_code, error)
            return JobExecutionResult(
                job_name=normalized_job_name,
                status="failed",
                error_code=error.error_code,
                detail=str(error),
            )
        return JobExecutionResult(job_name=normalized_job_name, status="success")

    def job_convert_file(self, input_path: str, output_path: str) -> ConversionResult:
        """Convert one export file and write the ledger file atomically.

        The output file is replaced only after the full input converts; on any
        failure the previous output, if any, is left untouched.

        Args:
            input_path: Source export path.
            output_path: Target ledger path.

        Returns:
            ConversionResult: Conversion outcome.

        Raises:
            InputFileNotFoundError: Raised when the input file does not exist.
            MalformedInputError: Raised when a source row cannot be parsed.
            InvalidTradeError: Raised when a trade violates ledger constraints.
            InsufficientLotsError: Raised when a disposal exceeds open lots.
        """

        try:
            with open(input_path, encoding="utf-8-sig", newline="") as input_file:
                result = self.job_convert_lines(input_file)
        except FileNotFoundError as error:
            raise InputFileNotFoundError(f"input file not found: {input_path}") from error

        _job_write_atomically(path=Path(output_path), content=result.ledger_text)
        logger.info(
            "Wrote %s: %d trades (%d buys, %d sells), %d skipped rows, %s realized gain %s, %s left in %d open lots",
            output_path,
            result.trade_count,
            result.buy_count,
            result.sell_count,
            result.skipped_row_count,
            result.lot_policy_name,
            result.realized_gain_total,
            result.open_quantity,
            result.open_lot_count,
        )
        return result

    def job_convert_text(self, csv_text: str) -> ConversionResult:
        """Convert in-memory export text without touching the filesystem."""

        return self.job_convert_lines(io.StringIO(csv_text, newline=""))

    def job_convert_lines(self, lines: Iterable[str]) -> ConversionResult:
        """Run the forward pipeline over export lines.

        Args:
            lines: Raw export lines.

        Returns:
            ConversionResult: Buffered entries, rendered text, and run counters.

        Raises:
            MalformedInputError: Raised when a source row cannot be parsed.
            InvalidTradeError: Raised when a trade violates ledger constraints.
            InsufficientLotsError: Raised when a disposal exceeds open lots.
        """

        trade_reader = self._trade_reader_factory()
        lot_ledger = self._ledger_factory()

        trades: Iterator[Trade] = trade_reader.reader_iter_trades(lines)
        if self._config.trade_sort_enabled:
            trades = iter(sorted(trades, key=lambda trade: trade.timestamp))

        entries = tuple(lot_ledger.ledger_record_trade(trade) for trade in trades)
        buy_count = sum(1 for entry in entries if entry.entry_is_acquisition())
        open_lots = lot_ledger.ledger_open_lots()

        return ConversionResult(
            entries=entries,
            ledger_text=self._formatter.formatter_render_entries(entries),
            trade_count=len(entries),
            buy_count=buy_count,
            sell_count=len(entries) - buy_count,
            skipped_row_count=trade_reader.reader_skipped_rows,
            realized_gain_total=sum(
                (entry.realized_gain for entry in entries if entry.realized_gain is not None),
                Decimal("0"),
            ),
            open_quantity=sum((lot.remaining_amount for lot in open_lots), Decimal("0")),
            open_lot_count=len(open_lots),
            lot_policy_name=lot_ledger.ledger_policy_name(),
        )


def _job_write_atomically(path: Path, content: str) -> None:
    """Write text to a sibling temp file and move it over the target path.

    Args:
        path: Target file path.
        content: Full file content.

    Returns:
        None: Writes the file as side effect.

    Raises:
        OSError: Raised when the target directory is not writable.
    """

    file_descriptor, temp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(file_descriptor, "w", encoding="utf-8", newline="") as temp_file:
            temp_file.write(content)
        os.chmod(temp_name, _job_output_mode(path))
        os.replace(temp_name, path)
    except BaseException:
        os.unlink(temp_name)
        raise


def _job_output_mode(path: Path) -> int:
    """Return the permission bits the written ledger file should carry.

    An existing target keeps its mode; a new one gets the umask default that a
    plain `open` would apply, since `mkstemp` always creates owner-only files.
    """

    try:
        return stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        current_umask = os.umask(0)
        os.umask(current_umask)
        return 0o666 & ~current_umask
