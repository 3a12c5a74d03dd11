"""HTTP client for the calculator service."""
import json
from typing import Union
from urllib.error import HTTPError
from urllib.parse import urlencode
from urllib.request import urlopen

from pydantic import BaseModel, ConfigDict, Field, FilePath, IPvAnyAddress

from calculator_service.common.calculator import Operation
from calculator_service.common.logger import logger
from calculator_service.common.operations import ErrorResponse, OperationResult


class CalculatorClientError(Exception):
    """Raised when the service answers with an error status."""

    def __init__(self, status_code: int, response: ErrorResponse):
        super().__init__(f"{status_code}: {response.error}")
        self.status_code = status_code
        self.response = response


class CalculatorClient(BaseModel):
    """
    HTTP client responsible for sending operations to the calculator service.

    The client:
    - issues GET requests against the four ``/calculator/<op>`` routes
    - decodes results into OperationResult
    - raises CalculatorClientError carrying the decoded ErrorResponse otherwise
    - evaluates whole operations files for smoke runs
    """

    # Make the Pydantic instance immutable (read-only), to prevent errors
    # that could be caused by changes to the network configuration during execution.
    model_config = ConfigDict(frozen=True)

    host: IPvAnyAddress = Field(default="127.0.0.1", description="Server host address")
    port: int = Field(default=8000, ge=1, le=65535, description="Server TCP port")
    timeout: float = Field(default=5.0, gt=0, description="Request timeout in seconds")

    @property
    def base_url(self) -> str:
        host = f"[{self.host}]" if self.host.version == 6 else str(self.host)
        return f"http://{host}:{self.port}"

    def _get(self, path: str, params: dict = None) -> dict:
        """
        Send a GET request and decode the JSON body.

        :param str path: Route path, starting with "/"
        :param dict params: Query parameters

        :return: Decoded JSON body
        :rtype: dict
        :raises CalculatorClientError: If the service answers with an error status
        """
        url = f"{self.base_url}{path}"
        if params:
            url = f"{url}?{urlencode(params)}"
        try:
            with urlopen(url, timeout=self.timeout) as response:
                return json.loads(response.read().decode())
        except HTTPError as exc:
            # 4xx and 5xx answers still carry a JSON ErrorResponse
            body = exc.read().decode()
            try:
                payload = ErrorResponse.model_validate_json(body)
            except ValueError:
                payload = ErrorResponse(error=body or exc.reason, code="http_error")
            raise CalculatorClientError(exc.code, payload) from None

    def calculate(
        self,
        operation: Union[Operation, str],
        first: Union[float, str],
        second: Union[float, str],
    ) -> OperationResult:
        """
        Evaluate ``first <op> second`` on the service.

        Operands are sent as given, so raw strings reach the server untouched.

        :param operation: Operation or its route name ("add", "sub", "mul", "div")
        :param first: Left operand
        :param second: Right operand

        :return: Decoded result
        :rtype: OperationResult
        :raises ValueError: If the operation is unknown
        :raises CalculatorClientError: If the service rejects the request
        """
        operation = Operation(operation)
        body = self._get(f"/calculator/{operation.value}", {"first": first, "second": second})
        return OperationResult.model_validate(body)

    def add(self, first: float, second: float) -> float:
        return self.calculate(Operation.ADD, first, second).result

    def sub(self, first: float, second: float) -> float:
        return self.calculate(Operation.SUB, first, second).result

    def mul(self, first: float, second: float) -> float:
        return self.calculate(Operation.MUL, first, second).result

    def div(self, first: float, second: float) -> float:
        return self.calculate(Operation.DIV, first, second).result

    def health(self) -> bool:
        """Return True when the service answers its health probe."""
        try:
            return self._get("/health").get("status") == "healthy"
        except (CalculatorClientError, OSError):
            return False

    def run_file(self, input_file: FilePath, output_file: FilePath) -> int:
        """
        Evaluate every operation of an input file and write the results to an output file.

        Each non-empty line holds ``<operation> <first> <second>``, e.g. ``add 2 3``.
        Output lines read ``<line> = <result>`` or ``<line> -> ERROR: <message>``.

        :param FilePath input_file: Path to the operations file
        :param FilePath output_file: Path where results will be written

        :return: Number of lines that failed
        :rtype: int
        """
        failures = 0
        lines = [line.strip() for line in input_file.read_text().splitlines() if line.strip()]

        with output_file.open("w", encoding="utf-8") as f_out:
            for line_number, line in enumerate(lines, start=1):
                try:
                    tokens = line.split()
                    if len(tokens) != 3:
                        raise ValueError("expected '<operation> <first> <second>'")
                    result = self.calculate(*tokens)
                    f_out.write(f"{line} = {result.result}\n")
                except (ValueError, CalculatorClientError) as exc:
                    failures += 1
                    logger.error(f"❌ Line {line_number} failed: {line!r}: {exc}")
                    f_out.write(f"{line} -> ERROR: {exc}\n")
                # Flushing keeps progress on disk if the run is interrupted
                f_out.flush()

        logger.info(f"✉️ {len(lines) - failures}/{len(lines)} operations succeeded")
        return failures
