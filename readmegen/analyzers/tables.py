"""Lookup tables shared by the analyzer strategies."""

from __future__ import annotations

import re
from pathlib import PurePosixPath
from typing import Iterable, List, Optional, Set, Tuple

# Ordered: the first matching fragment labels a module.
FRAMEWORK_FRAGMENTS: Tuple[Tuple[str, str], ...] = (
    ("react-native", "React Native"),
    ("react", "React"),
    ("next", "Next.js"),
    ("nuxt", "Nuxt.js"),
    ("vue", "Vue.js"),
    ("@angular", "Angular"),
    ("svelte", "Svelte"),
    ("express", "Express.js"),
    ("fastify", "Fastify"),
    ("koa", "Koa.js"),
    ("@nestjs", "NestJS"),
    ("django", "Django"),
    ("flask", "Flask"),
    ("fastapi", "FastAPI"),
    ("tensorflow", "TensorFlow"),
    ("keras", "Keras"),
    ("torch", "PyTorch"),
    ("sklearn", "Scikit-Learn"),
    ("scikit-learn", "Scikit-Learn"),
    ("transformers", "Hugging Face Transformers"),
    ("pandas", "Pandas"),
    ("numpy", "NumPy"),
    ("matplotlib", "Matplotlib"),
    ("seaborn", "Seaborn"),
    ("plotly", "Plotly"),
    ("streamlit", "Streamlit"),
    ("mongoose", "MongoDB"),
    ("mongodb", "MongoDB"),
    ("pymongo", "MongoDB"),
    ("pg", "PostgreSQL"),
    ("psycopg2", "PostgreSQL"),
    ("mysql", "MySQL"),
    ("mysql2", "MySQL"),
    ("redis", "Redis"),
    ("sqlalchemy", "SQLAlchemy"),
    ("sequelize", "Sequelize"),
    ("@prisma/client", "Prisma"),
    ("prisma", "Prisma"),
    ("firebase", "Firebase"),
    ("@supabase/supabase-js", "Supabase"),
    ("supabase", "Supabase"),
    ("tailwindcss", "Tailwind CSS"),
    ("bootstrap", "Bootstrap"),
    ("@mui", "Material-UI"),
    ("@material-ui", "Material-UI"),
    ("redux", "Redux"),
    ("@reduxjs/toolkit", "Redux"),
    ("zustand", "Zustand"),
    ("jest", "Jest"),
    ("pytest", "Pytest"),
    ("cypress", "Cypress"),
    ("vite", "Vite"),
    ("webpack", "Webpack"),
    ("socket.io", "Socket.IO"),
    ("graphql", "GraphQL"),
    ("@apollo/client", "Apollo"),
)

FEATURE_FRAGMENTS: Tuple[Tuple[str, str], ...] = (
    ("auth", "Authentication"),
    ("login", "Authentication"),
    ("logout", "Authentication"),
    ("signup", "Authentication"),
    ("jwt", "Authentication"),
    ("jsonwebtoken", "Authentication"),
    ("passport", "Authentication"),
    ("oauth", "Authentication"),
    ("bcrypt", "Authentication"),
    ("upload", "File Upload"),
    ("multer", "File Upload"),
    ("nodemailer", "Email Services"),
    ("smtp", "Email Services"),
    ("email", "Email Services"),
    ("sendgrid", "Email Services"),
    ("stripe", "Payment Processing"),
    ("paypal", "Payment Processing"),
    ("payment", "Payment Processing"),
    ("checkout", "Payment Processing"),
    ("socket", "Real-time Features"),
    ("websocket", "Real-time Features"),
    ("cache", "Caching"),
    ("redis", "Caching"),
    ("mongoose", "Database Integration"),
    ("sqlalchemy", "Database Integration"),
    ("sequelize", "Database Integration"),
    ("prisma", "Database Integration"),
    ("database", "Database Integration"),
    ("pymongo", "Database Integration"),
    ("axios", "API Integration"),
    ("requests", "API Integration"),
    ("httpx", "API Integration"),
    ("fetch", "API Integration"),
    ("predict", "Machine Learning"),
    ("train", "Machine Learning"),
    ("search", "Search Functionality"),
    ("elasticsearch", "Search Functionality"),
    ("chart", "Data Visualization"),
    ("plot", "Data Visualization"),
    ("d3", "Data Visualization"),
    ("i18n", "Internationalization"),
    ("locale", "Internationalization"),
    ("graphql", "GraphQL"),
    ("apollo", "GraphQL"),
    ("celery", "Background Jobs"),
    ("queue", "Background Jobs"),
    ("cron", "Background Jobs"),
    ("dashboard", "Content Management"),
    ("admin", "Content Management"),
)

LANGUAGE_BY_EXTENSION = {
    ".js": "JavaScript",
    ".jsx": "JavaScript",
    ".mjs": "JavaScript",
    ".cjs": "JavaScript",
    ".ts": "TypeScript",
    ".tsx": "TypeScript",
    ".py": "Python",
    ".java": "Java",
    ".cpp": "C++",
    ".c": "C",
    ".cs": "C#",
    ".rb": "Ruby",
    ".php": "PHP",
    ".go": "Go",
    ".rs": "Rust",
    ".swift": "Swift",
    ".kt": "Kotlin",
    ".scala": "Scala",
    ".r": "R",
    ".jl": "Julia",
    ".sh": "Shell",
    ".vue": "Vue.js",
    ".svelte": "Svelte",
    ".dart": "Dart",
    ".html": "HTML",
    ".css": "CSS",
    ".scss": "SCSS",
    ".less": "LESS",
    ".sql": "SQL",
}

ROUTE_METHODS = frozenset(
    {"get", "post", "put", "patch", "delete", "head", "options", "all", "route", "api_route"}
)

# Receivers that register routes even when the path is not a literal.
ROUTER_RECEIVERS = re.compile(
    r"^(app|router|api|server|bp|blueprint|routes?)$|(router|app|api|bp)$", re.IGNORECASE
)

# Outbound HTTP clients; their verb calls are requests, not route registrations.
HTTP_CLIENT_RECEIVERS = frozenset(
    {
        "axios",
        "http",
        "https",
        "request",
        "requests",
        "httpx",
        "superagent",
        "ky",
        "client",
        "session",
        "fetch",
    }
)


def language_for(filename: str) -> Optional[str]:
    return LANGUAGE_BY_EXTENSION.get(PurePosixPath(filename).suffix.lower())


def _fragment_matches(module: str, fragment: str) -> bool:
    if module == fragment:
        return True
    return any(module.startswith(fragment + sep) for sep in ("/", "-", ".", "_"))


def detect_frameworks(modules: Iterable[str]) -> Set[str]:
    """Label import sources or dependency names with framework names."""
    found: Set[str] = set()
    for module in modules:
        normalized = module.strip().lower().lstrip(".")
        if not normalized:
            continue
        for fragment, label in FRAMEWORK_FRAGMENTS:
            if _fragment_matches(normalized, fragment):
                found.add(label)
                break
    return found


def detect_features(names: Iterable[str]) -> Set[str]:
    """Label identifiers, module names or paths with feature names (substring match)."""
    found: Set[str] = set()
    for name in names:
        lowered = name.lower()
        for fragment, label in FEATURE_FRAGMENTS:
            if fragment in lowered:
                found.add(label)
    return found


def unique(values: Iterable[str]) -> List[str]:
    seen: Set[str] = set()
    ordered: List[str] = []
    for value in values:
        if value and value not in seen:
            seen.add(value)
            ordered.append(value)
    return ordered


__all__ = [
    "FEATURE_FRAGMENTS",
    "FRAMEWORK_FRAGMENTS",
    "HTTP_CLIENT_RECEIVERS",
    "LANGUAGE_BY_EXTENSION",
    "ROUTER_RECEIVERS",
    "ROUTE_METHODS",
    "detect_features",
    "detect_frameworks",
    "language_for",
    "unique",
]
