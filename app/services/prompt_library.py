# app/services/prompt_library.py
from langchain_core.prompts import ChatPromptTemplate

SYSTEM_PROMPT = (
    "You are an educational content creator specializing in creating accurate, "
    "engaging questions for students."
)

# Literal braces in the JSON example are doubled for the template engine.
QUESTION_GENERATION_PROMPT = ChatPromptTemplate.from_messages([
    ("system", SYSTEM_PROMPT),
    ("human", """Generate educational questions for {grade} students studying {subject}, specifically on the topic of "{topic}".

Please create:
- {mcq_count} multiple-choice questions with exactly 4 options each (labeled A, B, C, D)
- {tf_count} true/false questions

For each question:
1. Make sure the content is factually accurate and grade-appropriate
2. For multiple-choice questions, ensure exactly one correct answer
3. For true/false questions, clearly indicate if the statement is true or false
4. Avoid ambiguous or trick questions

Format your response as a valid JSON array with this structure:
[
  {{
    "question": "Question text here?",
    "options": [{{"id": "A", "text": "First option"}}, {{"id": "B", "text": "Second option"}}, {{"id": "C", "text": "Third option"}}, {{"id": "D", "text": "Fourth option"}}],
    "correct_answer": "A",
    "type": "multiple_choice"
  }},
  {{
    "question": "True/false statement here.",
    "correct_answer": "True",
    "type": "true_false"
  }}
]"""),
])
