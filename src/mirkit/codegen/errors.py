"""Code generation errors."""


class GenerationError(Exception):
    """Code generation failed."""

    pass


class LoweringError(GenerationError):
    """A node could not be lowered into the intermediate representation."""

    def __init__(self, node_id: str, reason: str) -> None:
        self.node_id = node_id
        self.reason = reason
        super().__init__(f"Cannot lower node '{node_id}': {reason}")


class UnknownTargetError(GenerationError):
    """No backend is registered for the requested target."""

    def __init__(self, target: str) -> None:
        self.target = target
        super().__init__(f"Unknown generation target: {target}")
