from sqlmodel import Session, select
from folio.db.session import engine, create_db_and_tables
from folio.models.post import Post, PostCategory, PostStatus
from folio.models.profile import Profile
from folio.schemas.blog import CreatePostInput
from folio.services.blog import create_blog_service

AUTHOR_ID = "seed-author"


def paragraph(text):
    return {"type": "paragraph", "content": [{"type": "text", "text": text}]}


def document(*paragraphs):
    return {"type": "doc", "content": [paragraph(p) for p in paragraphs]}


def seed_posts():
    print("Creating database and tables...")
    create_db_and_tables()

    with Session(engine) as session:
        # Check if posts already exist to avoid duplicates
        existing_posts = session.exec(select(Post)).all()
        if existing_posts:
            print(f"Database already contains {len(existing_posts)} posts. Skipping seed.")
            return

        if session.get(Profile, AUTHOR_ID) is None:
            session.add(Profile(id=AUTHOR_ID, full_name="Portfolio Author"))
            session.commit()

        print("Seeding initial posts...")
        posts = [
            CreatePostInput(
                title="Building a Content API with FastAPI",
                excerpt="Repositories, services and a thin HTTP layer on top of SQLModel.",
                content=document(
                    "FastAPI and SQLModel make a small content API pleasant to build.",
                    "This post walks through the repository and service layers.",
                ),
                tags=["python", "fastapi"],
                status=PostStatus.PUBLISHED,
                category=PostCategory.TECHNICAL,
                featured=True,
            ),
            CreatePostInput(
                title="Storing Images in S3",
                excerpt="Uploading blog media with boto3.",
                content=document("Every uploaded image gets a key under its uploader's folder."),
                tags=["aws", "python"],
                status=PostStatus.PUBLISHED,
                category=PostCategory.TUTORIAL,
            ),
            CreatePostInput(
                title="Notes on Changing Teams",
                content=document("A draft about what I learned moving between teams."),
                tags=["career"],
                status=PostStatus.DRAFT,
                category=PostCategory.CAREER,
            ),
        ]

        service = create_blog_service(session)
        for post in posts:
            service.create_post(post, AUTHOR_ID)

        print(f"Successfully seeded {len(posts)} posts!")

if __name__ == "__main__":
    seed_posts()
