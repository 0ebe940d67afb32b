from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar, Union

from aibs_informatics_core.executors.base import BaseExecutor
from aibs_informatics_core.models.base import ModelProtocol
from aibs_informatics_core.utils.json import JSON
from aws_lambda_powertools.utilities.typing import LambdaContext

from ssm_parameter_replicator.common.base import HandlerMixins
from ssm_parameter_replicator.common.logging import LoggingMixins
from ssm_parameter_replicator.common.metrics import MetricsMixins

LambdaEvent = Union[JSON]  # type: ignore # https://github.com/python/mypy/issues/7866
LambdaHandlerType = Callable[[LambdaEvent, LambdaContext], Optional[JSON]]

REQUEST = TypeVar("REQUEST", bound=ModelProtocol)
RESPONSE = TypeVar("RESPONSE", bound=ModelProtocol)


@dataclass  # type: ignore[misc] # mypy #5374
class LambdaHandler(
    LoggingMixins,
    MetricsMixins,
    HandlerMixins,
    BaseExecutor[REQUEST, RESPONSE],
    Generic[REQUEST, RESPONSE],
):
    """Base class for strongly-typed AWS Lambda handlers.

    Subclasses declare a REQUEST and a RESPONSE model (anything following
    `ModelProtocol`, usually a `SchemaModel`) and implement `handle`. The
    function returned by `get_handler` takes care of:
    - Lambda context injection into the structured logger
    - event deserialization into the REQUEST model
    - response serialization

    Example:
        ```python
        @dataclass
        class MyRequest(SchemaModel):
            name: str

        @dataclass
        class MyResponse(SchemaModel):
            message: str

        class MyHandler(LambdaHandler[MyRequest, MyResponse]):
            def handle(self, request: MyRequest) -> MyResponse:
                return MyResponse(message=f"Hello, {request.name}!")

        handler = MyHandler.get_handler()
        ```
    """

    def __post_init__(self):
        # Placeholder until the invocation context is injected by the handler function
        self.context = LambdaContext()
        super().__post_init__()

    # --------------------------------------------------------------------
    # Handler provider methods
    # --------------------------------------------------------------------

    @classmethod
    def get_handler(cls, *args, **kwargs) -> LambdaHandlerType:
        """Create a Lambda handler function for this handler class.

        A new handler instance is created for every invocation. Arguments
        given here are forwarded to the constructor, so long-lived
        collaborators built once per process can be passed in.

        Args:
            *args: Positional arguments passed to the handler constructor.
            **kwargs: Keyword arguments passed to the handler constructor.

        Returns:
            A callable Lambda handler function suitable for AWS Lambda.
        """

        logger = cls.get_logger(service=cls.service_name(), add_to_root=False)

        @logger.inject_lambda_context(log_event=True)
        def handler(event: LambdaEvent, context: LambdaContext) -> Optional[JSON]:
            lambda_handler = cls(*args, **kwargs)  # type: ignore[call-arg]
            logger.info(f"Instantiated {lambda_handler}.")
            lambda_handler.log = logger
            lambda_handler.context = context
            lambda_handler.add_logger_to_root()

            lambda_handler.log.info(f"Deserializing event: {event}")

            request = lambda_handler.deserialize_request(event)

            lambda_handler.log.info("Event successfully deserialized. Calling handler...")
            response = lambda_handler.handle(request=request)

            lambda_handler.log.info(
                f"Handler completed and returned following response: {response}"
            )
            if response:
                lambda_handler.log.info("Serializing response")
                return lambda_handler.serialize_response(response)

            return None

        return handler

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"request: {self.get_request_cls()}, "
            f"response: {self.get_response_cls()}"
            ")"
        )
