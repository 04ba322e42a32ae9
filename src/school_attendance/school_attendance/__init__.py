"""School Attendance package.

Feature modules (profiles, classes, students, attendance, admin) each carry a
domain model, a repository Protocol with its MySQL implementation, a service
and a thin Flask controller.
"""
