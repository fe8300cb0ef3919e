# Routes package init
"""
Tareas Backend: Routes Package
==============================

Route Inventory:
    - tasks.py:   GET    /api/tareas              (list own tasks, 401 if no session)
                  POST   /api/tareas              (create task, 401 if no session)
                  DELETE /api/tareas/{task_id}    (delete own task)
    - pages.py:   GET    /                        (router: dashboard or login)
                  GET|POST /login, GET|POST /register
                  GET    /dashboard
                  POST   /dashboard/tasks, POST /dashboard/tasks/{task_id}/delete
                  POST   /logout
    - health.py:  GET    /health

Routes stay thin: they take the principal from a guard dependency, call a
service, and shape the response.
"""
