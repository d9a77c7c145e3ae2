from strata._internal._path import WILDCARD as WILDCARD
from strata.routing.cache import MatchCache as MatchCache, MatchResult as MatchResult
from strata.routing.compose import compose as compose
from strata.routing.handlers import (
    Middleware as Middleware,
    Mount as Mount,
    Plain as Plain,
    as_middleware as as_middleware,
    mount as mount,
)
from strata.routing.layer import Layer as Layer
from strata.routing.mixins import RoutingMethodsMixin as RoutingMethodsMixin
from strata.routing.router import Router as Router, RouterOptions as RouterOptions
