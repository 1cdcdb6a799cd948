"""What happens to a product that finds its stage resource exhausted."""


def get_admission_policy_by_type(policy: str, **kwargs):
    """Get admission policy object based on given type."""
    policy = policy.strip().lower()
    if policy == "drop":
        return DropPolicy(**kwargs)
    elif policy == "retry":
        return RetryPolicy(**kwargs)
    else:
        raise ValueError(f"Unknown admission policy '{policy}'")


class AdmissionPolicy:
    name = "base"

    def __repr__(self):
        return f"{self.__class__.__name__}()"

    def on_rejected(self, pipeline, product, stage, resource_class, attempt):
        """Called when `product` could not acquire `resource_class`.

        Args:
            pipeline: Stage pipeline that made the attempt.
            product: Product at the rejected stage.
            stage: Stage that was attempted.
            resource_class: Resource class that was exhausted.
            attempt: Number of earlier rejections at this stage.
        """
        raise NotImplementedError


class DropPolicy(AdmissionPolicy):
    """Book the stage duration as waiting time and drop the product.

    There is no queueing: a product rejected at any stage leaves the system
    and never counts as finished.
    """

    name = "drop"

    def on_rejected(self, pipeline, product, stage, resource_class, attempt):
        pipeline.statistics.add_waiting(resource_class, stage.duration)
        pipeline.drop(product, stage)


class RetryPolicy(AdmissionPolicy):
    name = "retry"

    def __init__(self, delay: float = 0.5, max_retries: int = 3):
        """Try the stage again after a fixed delay, then drop.

        Each retry books `delay` as waiting time. Once `max_retries` retries
        were rejected, the product is dropped as with `DropPolicy`.

        Args:
            delay (optional): Time between attempts. Defaults to 0.5.
            max_retries (optional): Retries before dropping. Defaults to 3.
        """
        if delay <= 0:
            raise ValueError(f"Retry delay must be positive, got {delay}")
        if max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {max_retries}")
        self.delay = delay
        self.max_retries = max_retries

    def __repr__(self):
        return (
            f"{self.__class__.__name__}(delay={self.delay}, "
            f"max_retries={self.max_retries})"
        )

    def on_rejected(self, pipeline, product, stage, resource_class, attempt):
        if attempt >= self.max_retries:
            pipeline.statistics.add_waiting(resource_class, stage.duration)
            pipeline.drop(product, stage)
            return

        pipeline.statistics.add_waiting(resource_class, self.delay)
        pipeline.retry(
            product, at=pipeline.now + self.delay, attempt=attempt + 1
        )
