from autodial import Lifetime, service_lifetime
from hybrid_app.services import IUnregisteredDependency


@service_lifetime(Lifetime.SCOPED)
class ServiceWithUnregisteredDependency:
    def __init__(self, dependency: IUnregisteredDependency) -> None:
        self.dependency = dependency
