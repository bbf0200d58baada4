#!/usr/bin/env python3
"""
Flow SMS Studio Dashboard — Demo Seed.

Studio team, four clients and six projects with members, phases,
milestones, tasks, documents and an activity trail.  Every seeded user
gets the default test password (``SEED_DEFAULT_PASSWORD``, flow123).

Usage:
    python scripts/seed_demo_data.py              # add to the current DB
    python scripts/seed_demo_data.py --reset      # drop + recreate tables first
"""

import argparse
import sys
from datetime import date, datetime, timedelta, timezone

sys.path.insert(0, ".")

from flowsms import create_app
from flowsms.models import db
from flowsms.models.project import Activity, Document, Milestone, Phase, Project, ProjectMember
from flowsms.models.task import Comment, Task
from flowsms.models.user import Client, User
from flowsms.services.auth_service import seed_test_users
from flowsms.utils.crypto import hash_password

_now = datetime.now(timezone.utc)

STANDARD_PHASES = ("Concept Design", "Schematic Design", "Design Development", "Construction Documents")


# ═══════════════════════════════════════════════════════════════════════════
# 1. PEOPLE
# ═══════════════════════════════════════════════════════════════════════════

def seed_users(password):
    pw_hash = hash_password(password)
    rows = [
        ("swapnil@flow.life", "Swapnil Meena", "admin", "Management", "+966 50 123 4567"),
        ("ahmed@flow.life", "Ahmed Al-Rashid", "project_manager", "Architecture", "+966 50 234 5678"),
        ("sarah@flow.life", "Sarah Hassan", "team_lead", "Engineering", "+966 50 345 6789"),
        ("mohammed@flow.life", "Mohammed Khalid", "designer", "Interior Design", "+966 50 456 7890"),
        ("fatima@flow.life", "Fatima Al-Saud", "engineer", "Structural", "+966 50 567 8901"),
        ("omar@flow.life", "Omar Faisal", "designer", "Architecture", "+966 50 678 9012"),
    ]
    users = {}
    for email, name, role, department, phone in rows:
        user = User.query.filter_by(email=email).first()
        if user is None:
            user = User(email=email, name=name, role=role, department=department, phone=phone)
            db.session.add(user)
        user.password_hash = pw_hash
        users[email.split("@")[0]] = user
    db.session.flush()
    print(f"   ✅ {len(users)} users")
    return users


def seed_clients():
    rows = [
        ("Saudi Development Corp", "contact@saudidev.com", "+966 11 123 4567",
         "Abdullah Al-Fahad", "King Fahd Road, Riyadh"),
        ("Riyadh Municipality", "projects@riyadh.gov.sa", "+966 11 234 5678",
         "Nasser Al-Otaibi", "Municipality Building, Riyadh"),
        ("Al-Mamlaka Holdings", "development@almamlaka.com", "+966 11 345 6789",
         "Khalid Al-Ibrahim", "Al-Mamlaka Tower, Riyadh"),
        ("Jeddah Investment Group", "info@jig.sa", "+966 12 456 7890",
         "Salman Al-Harbi", "Corniche Road, Jeddah"),
    ]
    clients = []
    for name, email, phone, contact, address in rows:
        client = Client(name=name, email=email, phone=phone, contact_name=contact, address=address)
        db.session.add(client)
        clients.append(client)
    db.session.flush()
    print(f"   ✅ {len(clients)} clients")
    return clients


# ═══════════════════════════════════════════════════════════════════════════
# 2. PROJECTS
# ═══════════════════════════════════════════════════════════════════════════

def seed_projects(clients):
    rows = [
        ("Al-Mamlaka Tower",
         "Mixed-use high-rise with offices, retail and luxury apartments in central Riyadh.",
         "architecture", "active", 2, "Riyadh, Saudi Arabia",
         date(2024, 1, 15), date(2025, 12, 31), 45_000_000, 65),
        ("Riyadh Cultural Center",
         "Landmark cultural facility showcasing Saudi heritage with modern architecture.",
         "architecture", "active", 1, "Riyadh, Saudi Arabia",
         date(2024, 3, 1), date(2026, 6, 30), 78_000_000, 35),
        ("Desert Bloom Villas",
         "Sustainable community of 50 villas with desert landscaping.",
         "mixed", "active", 0, "Diriyah, Saudi Arabia",
         date(2024, 2, 1), date(2025, 8, 31), 32_000_000, 80),
        ("Jeddah Office Complex",
         "Class A office interiors targeting LEED certification.",
         "interior", "planning", 3, "Jeddah, Saudi Arabia",
         date(2024, 6, 1), date(2025, 12, 31), 25_000_000, 15),
        ("Industrial Park Infrastructure",
         "Roads, utilities and facilities for a new industrial park.",
         "engineering", "on_hold", 0, "Dammam, Saudi Arabia",
         date(2024, 4, 1), date(2026, 3, 31), 55_000_000, 25),
        ("Heritage Hotel Restoration",
         "Adaptive reuse of a historic building as a boutique hotel.",
         "interior", "completed", 1, "Jeddah, Saudi Arabia",
         date(2023, 3, 1), date(2024, 5, 31), 18_000_000, 100),
    ]
    projects = []
    for name, desc, ptype, status, client_idx, location, start, end, budget, progress in rows:
        project = Project(
            name=name, description=desc, type=ptype, status=status,
            client_id=clients[client_idx].id, location=location,
            start_date=start, end_date=end, budget=budget, progress=progress,
        )
        db.session.add(project)
        projects.append(project)
    db.session.flush()
    print(f"   ✅ {len(projects)} projects")
    return projects


def seed_members(projects, users):
    teams = [
        [("ahmed", "Project Manager"), ("sarah", "Lead Engineer"), ("omar", "Architect")],
        [("ahmed", "Project Manager"), ("mohammed", "Interior Designer"), ("fatima", "Structural Engineer")],
        [("sarah", "Team Lead"), ("omar", "Architect"), ("mohammed", "Landscape Designer")],
        [("ahmed", "Project Manager"), ("mohammed", "Lead Designer")],
        [("sarah", "Team Lead"), ("fatima", "Civil Engineer")],
        [("mohammed", "Lead Designer"), ("omar", "Conservation Architect")],
    ]
    count = 0
    for project, team in zip(projects, teams):
        for key, role in team:
            db.session.add(ProjectMember(project_id=project.id, user_id=users[key].id, role=role))
            count += 1
    db.session.flush()
    print(f"   ✅ {count} project members")


def seed_phases_and_milestones(projects):
    phases_by_project = {}
    milestone_count = 0
    for project in projects:
        span = (project.end_date - project.start_date).days
        step = span // len(STANDARD_PHASES)
        phases = []
        for order, name in enumerate(STANDARD_PHASES, start=1):
            start = project.start_date + timedelta(days=step * (order - 1))
            end = start + timedelta(days=step - 1)
            done = project.progress >= order * 25
            phase = Phase(
                project_id=project.id, name=name, order=order,
                start_date=start, end_date=end,
                progress=100 if done else max(0, project.progress - (order - 1) * 25) * 4,
            )
            db.session.add(phase)
            phases.append(phase)

            milestone_status = "completed" if done else ("overdue" if end < date.today() else "pending")
            db.session.add(Milestone(
                project_id=project.id,
                name=f"{name} sign-off",
                due_date=end,
                status=milestone_status,
                completed_at=_now if milestone_status == "completed" else None,
            ))
            milestone_count += 1
        phases_by_project[project.id] = phases
    db.session.flush()
    print(f"   ✅ {sum(len(p) for p in phases_by_project.values())} phases, {milestone_count} milestones")
    return phases_by_project


def seed_tasks(projects, phases_by_project, users):
    templates = [
        ("Site analysis report", "completed", "high", "omar"),
        ("Massing options for client review", "in_progress", "urgent", "ahmed"),
        ("Structural grid coordination", "review", "high", "fatima"),
        ("Material palette board", "todo", "medium", "mohammed"),
        ("MEP load estimate", "blocked", "medium", "sarah"),
        ("Update area schedule", "todo", "low", "omar"),
    ]
    creator = users["swapnil"]
    count = 0
    for project in projects[:4]:
        order_by_status: dict[str, int] = {}
        phases = phases_by_project[project.id]
        for i, (title, status, priority, assignee) in enumerate(templates):
            order_by_status[status] = order_by_status.get(status, 0) + 1
            task = Task(
                project_id=project.id,
                phase_id=phases[min(i // 2, len(phases) - 1)].id,
                title=title,
                description=f"{title} for {project.name}.",
                priority=priority,
                assignee_id=users[assignee].id,
                creator_id=creator.id,
                due_date=date.today() + timedelta(days=7 * (i - 1)),
                estimated_hours=8.0 * (i + 1),
                order=order_by_status[status],
            )
            task.set_status(status)
            db.session.add(task)
            db.session.flush()
            if status == "review":
                db.session.add(Comment(
                    task_id=task.id, user_id=users["ahmed"].id,
                    content="Please check the column sizes on levels 12 to 18.",
                ))
                db.session.add(Task(
                    project_id=project.id, parent_id=task.id, title="Check transfer beams",
                    status="todo", priority="high", creator_id=creator.id, order=1,
                ))
            db.session.add(Activity(
                project_id=project.id, user_id=creator.id, action="created_task",
                target=title, details={"task_id": task.id},
            ))
            count += 1
    db.session.flush()
    print(f"   ✅ {count} tasks")


def seed_documents(projects, users):
    rows = [
        ("Site plan.pdf", "drawing"),
        ("Design brief.docx", "report"),
        ("Consultancy agreement.pdf", "contract"),
    ]
    count = 0
    for project in projects:
        for name, category in rows:
            slug = project.name.lower().replace(" ", "-")
            db.session.add(Document(
                project_id=project.id, name=name, category=category,
                file_url=f"https://files.flow.life/{slug}/{name.replace(' ', '_')}",
                uploader_id=users["ahmed"].id,
            ))
            db.session.add(Activity(
                project_id=project.id, user_id=users["ahmed"].id,
                action="uploaded_document", target=name,
            ))
            count += 1
    db.session.flush()
    print(f"   ✅ {count} documents")


def main():
    parser = argparse.ArgumentParser(description="Seed Flow SMS demo data")
    parser.add_argument("--reset", action="store_true", help="Drop and recreate all tables")
    args = parser.parse_args()

    app = create_app()
    with app.app_context():
        if args.reset:
            print("\n⚠️  Resetting DB (drop_all + create_all)...")
            db.drop_all()
            db.create_all()

        print("=" * 60)
        print("🌱 Seeding Flow SMS demo data...")
        print("=" * 60)

        password = app.config.get("SEED_DEFAULT_PASSWORD", "flow123")
        seed_test_users(password)
        users = seed_users(password)
        clients = seed_clients()
        projects = seed_projects(clients)
        seed_members(projects, users)
        phases_by_project = seed_phases_and_milestones(projects)
        seed_tasks(projects, phases_by_project, users)
        seed_documents(projects, users)

        db.session.commit()

        print()
        print("🎉 Demo data loaded. Log in with any seeded email and password", repr(password))


if __name__ == "__main__":
    main()
