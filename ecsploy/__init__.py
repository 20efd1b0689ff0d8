"""ecsploy - deploy images to ECS services and run one-off ECS tasks."""

__version__ = "0.1.0"
