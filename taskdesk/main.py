import logging
from contextlib import asynccontextmanager
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, FastAPI, Path
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session as DBSession

from taskdesk import config
from taskdesk.auth import CredentialChecker, default_checker, require_credentials
from taskdesk.db import SubTaskModel, TaskModel, TodoModel, get_db, init_db
from taskdesk.errors import RecordNotFoundError, RecordValidationError, register_exception_handlers
from taskdesk.models import INT64_MAX, INT64_MIN
from taskdesk.repository import RecordRepository
from taskdesk.validation import validate

log = logging.getLogger(__name__)

router = APIRouter()
authed = [Depends(require_credentials)]

RecordId = Annotated[int, Path(ge=INT64_MIN, le=INT64_MAX)]


def _validated(kind: str, payload: Any) -> dict:
    result = validate(kind, payload)
    if not result.ok:
        raise RecordValidationError(result.failure)
    return result.record


def tasks_repo(db: DBSession = Depends(get_db)) -> RecordRepository:
    return RecordRepository(db, TaskModel)

def sub_tasks_repo(db: DBSession = Depends(get_db)) -> RecordRepository:
    return RecordRepository(db, SubTaskModel)

def todos_repo(db: DBSession = Depends(get_db)) -> RecordRepository:
    return RecordRepository(db, TodoModel)


def create_app(database_url: str | None = None,
               checker: CredentialChecker | None = None) -> FastAPI:
    database_url = database_url or config.DATABASE_URL

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.session_factory = init_db(database_url)
        yield

    app = FastAPI(title="taskdesk", lifespan=lifespan)
    app.state.credential_checker = checker or default_checker()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.ALLOWED_ORIGINS or ["*"],
        allow_credentials=True, allow_methods=["*"], allow_headers=["*"],
    )
    register_exception_handlers(app)
    app.include_router(router)
    return app


@router.get("/")
def root():
    return {"message": "API is running"}

@router.get("/hello")
def hello():
    return {"message": "Hello taskdesk!"}

# ---------- Tasks ----------

@router.post("/tasks", dependencies=authed)
def create_task(payload: Any = Body(None), repo: RecordRepository = Depends(tasks_repo)):
    task = repo.create(_validated("task", payload))
    log.info("Created task %s", task["id"])
    return {"task": task}

@router.get("/tasks", dependencies=authed)
def list_tasks(repo: RecordRepository = Depends(tasks_repo)):
    return {"tasks": repo.find_all()}

@router.get("/users/{user_id}/tasks", dependencies=authed)
def list_tasks_by_user(user_id: RecordId, repo: RecordRepository = Depends(tasks_repo)):
    return {"tasks": repo.find_all(user_id=user_id)}

@router.get("/teams/{team_id}/tasks", dependencies=authed)
def list_tasks_by_team(team_id: RecordId, repo: RecordRepository = Depends(tasks_repo)):
    return {"tasks": repo.find_all(team_id=team_id)}

@router.get("/tasks/{task_id}", dependencies=authed)
def get_task(task_id: RecordId, repo: RecordRepository = Depends(tasks_repo)):
    task = repo.get(task_id)
    if task is None:
        raise RecordNotFoundError("Task")
    return {"task": task}

@router.put("/tasks/{task_id}", dependencies=authed)
def update_task(task_id: RecordId, payload: Any = Body(None),
                repo: RecordRepository = Depends(tasks_repo)):
    record = _validated("task", payload)
    # an omitted due date clears the stored one
    record.setdefault("due_date", None)
    task = repo.update(task_id, record)
    if task is None:
        raise RecordNotFoundError("Task")
    return {"task": task}

@router.delete("/tasks/{task_id}", dependencies=authed)
def delete_task(task_id: RecordId, repo: RecordRepository = Depends(tasks_repo)):
    """Deleting a task also deletes its sub-tasks."""
    if not repo.delete(task_id):
        raise RecordNotFoundError("Task")
    log.info("Deleted task %s", task_id)
    return {"message": "Task deleted successfully"}

# ---------- Sub-tasks ----------

def _require_parent(repo: RecordRepository, record: dict) -> None:
    if not RecordRepository(repo.db, TaskModel).exists(record["task_id"]):
        raise RecordNotFoundError("Task")

@router.post("/sub-tasks", dependencies=authed)
def create_sub_task(payload: Any = Body(None),
                    repo: RecordRepository = Depends(sub_tasks_repo)):
    record = _validated("sub_task", payload)
    _require_parent(repo, record)
    return {"subTask": repo.create(record)}

@router.get("/sub-tasks", dependencies=authed)
def list_sub_tasks(repo: RecordRepository = Depends(sub_tasks_repo)):
    return {"subTasks": repo.find_all()}

@router.get("/tasks/{task_id}/sub-tasks", dependencies=authed)
def list_sub_tasks_by_task(task_id: RecordId, repo: RecordRepository = Depends(sub_tasks_repo)):
    return {"subTasks": repo.find_all(task_id=task_id)}

@router.get("/sub-tasks/{sub_task_id}", dependencies=authed)
def get_sub_task(sub_task_id: RecordId, repo: RecordRepository = Depends(sub_tasks_repo)):
    sub_task = repo.get(sub_task_id)
    if sub_task is None:
        raise RecordNotFoundError("SubTask")
    return {"subTask": sub_task}

@router.put("/sub-tasks/{sub_task_id}", dependencies=authed)
def update_sub_task(sub_task_id: RecordId, payload: Any = Body(None),
                    repo: RecordRepository = Depends(sub_tasks_repo)):
    record = _validated("sub_task", payload)
    record.setdefault("due_date", None)
    if not repo.exists(sub_task_id):
        raise RecordNotFoundError("SubTask")
    _require_parent(repo, record)
    return {"subTask": repo.update(sub_task_id, record)}

@router.delete("/sub-tasks/{sub_task_id}", dependencies=authed)
def delete_sub_task(sub_task_id: RecordId, repo: RecordRepository = Depends(sub_tasks_repo)):
    if not repo.delete(sub_task_id):
        raise RecordNotFoundError("SubTask")
    return {"message": "SubTask deleted successfully"}

# ---------- Todos ----------

def create_todo(payload: Any = Body(None), repo: RecordRepository = Depends(todos_repo)):
    return {"todo": repo.create(_validated("todo", payload))}

router.add_api_route("/todos", create_todo, methods=["POST"], dependencies=authed)
# singular path kept for older frontend builds
router.add_api_route("/todo", create_todo, methods=["POST"], dependencies=authed)

@router.get("/todos", dependencies=authed)
def list_todos(repo: RecordRepository = Depends(todos_repo)):
    return {"todos": repo.find_all()}

@router.get("/users/{user_id}/todos", dependencies=authed)
def list_todos_by_user(user_id: RecordId, repo: RecordRepository = Depends(todos_repo)):
    return {"todos": repo.find_all(user_id=user_id)}

@router.get("/todos/{todo_id}", dependencies=authed)
def get_todo(todo_id: RecordId, repo: RecordRepository = Depends(todos_repo)):
    todo = repo.get(todo_id)
    if todo is None:
        raise RecordNotFoundError("Todo")
    return {"todo": todo}

@router.put("/todos/{todo_id}", dependencies=authed)
def update_todo(todo_id: RecordId, payload: Any = Body(None),
                repo: RecordRepository = Depends(todos_repo)):
    todo = repo.update(todo_id, _validated("todo", payload))
    if todo is None:
        raise RecordNotFoundError("Todo")
    return {"todo": todo}

@router.delete("/todos/{todo_id}", dependencies=authed)
def delete_todo(todo_id: RecordId, repo: RecordRepository = Depends(todos_repo)):
    if not repo.delete(todo_id):
        raise RecordNotFoundError("Todo")
    return {"message": "Todo deleted successfully"}


logging.basicConfig(level=config.LOG_LEVEL)
app = create_app()
