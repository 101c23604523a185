"""Root RPC router; procedure paths are ``<namespace>.<name>``."""
from catalog.rpc import accounts, auth, car_manufacturers, car_models, cars
from catalog.rpc.base import RpcRouter

app_router = RpcRouter()
app_router.mount("auth", auth.router)
app_router.mount("cars", cars.router)
app_router.mount("carModels", car_models.router)
app_router.mount("carManufacturers", car_manufacturers.router)
app_router.mount("accounts", accounts.router)
