from .api import PmsClient
from .exceptions import ApiError, AuthenticationRequired, NotFound, PermissionDenied
from .http import HttpClient, TokenStore
from .state import Dashboard, LocalStore, ProjectDetailState, ProjectListState, TaskActivityState
