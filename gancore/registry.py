"""Name -> experiment runner lookup used by run_experiment.py."""


class ExperimentRegistry:
    """Experiments register themselves by name and are looked up from the CLI.

    Usage:
        @ExperimentRegistry.register("gaussian_mixture")
        class GaussianMixtureExperiment: ...
    """

    _items: dict[str, type] = {}

    @classmethod
    def register(cls, name: str):
        if not isinstance(name, str):
            raise TypeError(
                f"{cls.__name__}.register() expects a string name, got {type(name)}"
            )

        def decorator(registered_cls):
            cls._items[name] = registered_cls
            return registered_cls
        return decorator

    @classmethod
    def get(cls, name: str):
        if name not in cls._items:
            available = ', '.join(sorted(cls._items.keys()))
            raise KeyError(f"Unknown experiment: '{name}'. Available: {available}")
        return cls._items[name]

    @classmethod
    def list_all(cls) -> list[str]:
        return sorted(cls._items.keys())
