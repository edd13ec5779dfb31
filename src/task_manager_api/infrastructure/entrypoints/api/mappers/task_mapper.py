from task_manager_api.core.domain.task import Task
from task_manager_api.infrastructure.entrypoints.api.dtos.task_dto import TaskResponse


class TaskMapper:
    @staticmethod
    def to_response(task: Task) -> TaskResponse:
        return TaskResponse(
            id=task.id,
            text=task.text,
            completed=task.completed,
            created_at=task.created_at,
        )

    @staticmethod
    def to_responses(tasks: list[Task]) -> list[TaskResponse]:
        return [TaskMapper.to_response(task) for task in tasks]
