from dependency_injector import containers, providers

from coachapi.config import Settings
from coachapi.database.session import get_db
from coachapi.services.checkin_service import CheckinService
from coachapi.services.gamification_service import GamificationService


class ConfigModule(containers.DeclarativeContainer):
    """Application configuration."""

    config = providers.Singleton(Settings)


class RepositoryModule(containers.DeclarativeContainer):
    """Database session."""

    get_db = providers.Resource(get_db)


class ServiceModule(containers.DeclarativeContainer):
    """Service layer dependencies."""

    config = providers.DependenciesContainer()
    repositories = providers.DependenciesContainer()

    gamification_service = providers.Factory(
        GamificationService, db=repositories.get_db, settings=config.config
    )
    checkin_service = providers.Factory(
        CheckinService,
        db=repositories.get_db,
        settings=config.config,
        gamification_service=gamification_service,
    )


class Container(containers.DeclarativeContainer):
    """Application container."""

    wiring_config = containers.WiringConfiguration(
        modules=[
            "coachapi.routers.checkin_router",
            "coachapi.routers.gamification_router",
        ],
    )

    config = providers.Container(ConfigModule)
    repositories = providers.Container(RepositoryModule)
    services = providers.Container(
        ServiceModule, config=config, repositories=repositories
    )
