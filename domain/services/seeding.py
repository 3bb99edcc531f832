import logging
from typing import Dict, List

from sqlalchemy.exc import SQLAlchemyError

from app.settings import settings
from domain.errors import ForbiddenError
from infra.repositories.profiles_repository import ProfilesRepository

logger = logging.getLogger(__name__)
profiles_repo = ProfilesRepository()

# (handle, full name, location, years, salary min, salary max, bio, skills, portfolio)
_CANDIDATES = [
    ("aminebensalem", "Amine Ben Salem", "Tunis", 5, 40000, 60000,
     "Experienced full-stack developer from Tunis with expertise in React and Node.js. "
     "Passionate about building scalable web applications.",
     ["React", "Node.js", "TypeScript", "PostgreSQL", "Docker"], "https://aminebensalem.tn"),
    ("mariemtrabelsi", "Mariem Trabelsi", "Sfax", 7, 50000, 75000,
     "Senior software engineer specializing in cloud architecture and DevOps. "
     "Based in Sfax with 7 years of experience.",
     ["AWS", "Kubernetes", "Python", "Terraform", "CI/CD", "Docker"], None),
    ("youssefgharbi", "Youssef Gharbi", "Sousse", 4, 35000, 55000,
     "Mobile developer focused on React Native and Flutter. "
     "Creating beautiful mobile experiences for users across Tunisia.",
     ["React Native", "Flutter", "Firebase", "REST API", "JavaScript", "Dart"],
     "https://youssefgharbi.com"),
    ("sarramessaoudi", "Sarra Messaoudi", "Tunis", 3, 45000, 65000,
     "Data scientist with strong background in machine learning and AI. "
     "Graduated from INSAT and worked on multiple ML projects.",
     ["Python", "TensorFlow", "PyTorch", "SQL", "Data Analysis", "Machine Learning"], None),
    ("mohamedayari", "Mohamed Ayari", "Bizerte", 8, 55000, 80000,
     "Backend specialist with deep expertise in Java and Spring Boot. "
     "8 years building enterprise applications.",
     ["Java", "Spring Boot", "Microservices", "MySQL", "MongoDB", "Redis"], None),
    ("nesrinekaroui", "Nesrine Karoui", "Nabeul", 3, 30000, 45000,
     "Frontend developer with eye for design. "
     "Creating pixel-perfect interfaces using modern web technologies.",
     ["Vue.js", "React", "CSS3", "Tailwind", "Figma", "JavaScript"], "https://nesrine.design"),
    ("khalilbouazizi", "Khalil Bouazizi", "Tunis", 6, 60000, 85000,
     "Cybersecurity engineer protecting digital assets. "
     "Certified ethical hacker with penetration testing experience.",
     ["Security", "Penetration Testing", "Python", "Linux", "Network Security", "CISSP"], None),
    ("rimferchichi", "Rim Ferchichi", "Sousse", 4, 35000, 50000,
     "Product designer and UX researcher. "
     "Creating user-centered designs based on research and data.",
     ["UI/UX Design", "Figma", "Adobe XD", "User Research", "Prototyping", "Design Systems"],
     "https://rimferchichi.com"),
    ("maherjebali", "Maher Jebali", "Monastir", 5, 40000, 60000,
     "Full-stack JavaScript developer. Building modern web applications from database to UI.",
     ["JavaScript", "React", "Express.js", "MongoDB", "Next.js", "GraphQL"],
     "https://maherjebali.dev"),
    ("ineschaabane", "Ines Chaabane", "Ariana", 4, 32000, 48000,
     "QA engineer ensuring software quality through automated testing. "
     "Expert in test automation frameworks.",
     ["Selenium", "Cypress", "Jest", "API Testing", "Python", "CI/CD"], None),
]

# Rim Ferchichi has no GitHub account
_NO_GITHUB = {"rimferchichi"}


def seed_candidates() -> List[Dict]:
    out = []
    for handle, name, city, years, sal_min, sal_max, bio, skills, portfolio in _CANDIDATES:
        first, _, last = name.lower().partition(" ")
        out.append({
            "email": f"{first}.{last.replace(' ', '')}@test.tn",
            "full_name": name,
            "profile": {
                "bio": bio,
                "skills": skills,
                "experience_years": years,
                "location": f"{city}, Tunisia",
                "github_url": None if handle in _NO_GITHUB else f"https://github.com/{handle}",
                "linkedin_url": f"https://linkedin.com/in/{handle}",
                "portfolio_url": portfolio,
                "desired_salary_min": sal_min,
                "desired_salary_max": sal_max,
            },
        })
    return out


def seed_test_candidates() -> Dict:
    if settings.ENV == "production":
        raise ForbiddenError("Seeding is disabled in production")

    created = []
    for candidate in seed_candidates():
        if profiles_repo.get_by_email(candidate["email"]):
            logger.info("Skipping existing test candidate %s", candidate["email"])
            continue
        try:
            user_id = profiles_repo.create(candidate["email"], candidate["full_name"], "seeker")
            profiles_repo.create_seeker_profile(user_id, **candidate["profile"])
            token = profiles_repo.issue_token(user_id)
        except SQLAlchemyError:
            logger.exception("Error creating test candidate %s", candidate["email"])
            continue
        created.append({"email": candidate["email"], "id": user_id,
                        "name": candidate["full_name"], "token": token})
        logger.info("Created test candidate %s", candidate["full_name"])

    logger.info("Successfully created %d test candidates", len(created))
    return {"success": True, "created": len(created), "users": created}
