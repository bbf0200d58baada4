"""HTTP blueprints; each module registers one ``Blueprint`` under /api."""
