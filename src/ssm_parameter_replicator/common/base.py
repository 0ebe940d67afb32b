from aws_lambda_powertools.utilities.typing import LambdaContext

CONTEXT_ATTR = "_context"


class HandlerMixins:
    """Mixin class exposing the invocation context and naming helpers.

    Attributes:
        context: The AWS Lambda context object for the current invocation.
    """

    @property
    def context(self) -> LambdaContext:
        """Get the Lambda context for the current invocation.

        Raises:
            ValueError: If context has not been set.
        """
        if not hasattr(self, CONTEXT_ATTR):
            raise ValueError(f"{self.__class__.__name__} has no Lambda context set")
        return getattr(self, CONTEXT_ATTR)

    @context.setter
    def context(self, value: LambdaContext):
        setattr(self, CONTEXT_ATTR, value)

    @classmethod
    def handler_name(cls) -> str:
        """Name of the handler, used as a metrics dimension."""
        return cls.__name__

    @classmethod
    def service_name(cls) -> str:
        """Service name used for the logger and the metrics of this handler."""
        return cls.__name__
