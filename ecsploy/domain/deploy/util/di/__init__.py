from ecsploy.domain.deploy.util.di.provider import DeployProvider

__all__ = ["DeployProvider"]
