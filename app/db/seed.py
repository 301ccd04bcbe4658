import logging

from sqlalchemy.orm import Session

from app.repositories.question_repository import QuestionRepository

logger = logging.getLogger(__name__)

DEFAULT_QUESTIONS = [
    ("Tell me about a time you had a conflict with a team member. How did you handle it?", "Behavioural"),
    ("Describe a project where you had to meet a tight deadline. What did you do to stay on track?", "Behavioural"),
    ("Have you ever made a mistake in code that went to production? How did you fix it and what did you learn?", "Behavioural"),
    ("How do you handle receiving critical feedback on your code or performance?", "Behavioural"),
    ("Tell me about a time when you had to learn a new tool or technology quickly. How did you approach it?", "Behavioural"),
    ("Explain the difference between == and === in JavaScript.", "Technical"),
    ("What are the advantages and disadvantages of using microservices architecture?", "Technical"),
    ("How would you optimize a slow SQL query?", "Technical"),
    ("Can you explain the concept of closures in JavaScript with an example?", "Technical"),
    ("What steps would you take to troubleshoot a 500 Internal Server Error in a production API?", "Technical"),
]


def seed_questions(db: Session) -> int:
    repo = QuestionRepository(db)
    if repo.count():
        return 0
    created = repo.seed(DEFAULT_QUESTIONS)
    logger.info("Seeded %d interview questions", created)
    return created
