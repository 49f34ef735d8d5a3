from autodial import Lifetime, service_lifetime


@service_lifetime(Lifetime.SCOPED)
class UntypedService:
    def __init__(self, dependency):
        self.dependency = dependency
