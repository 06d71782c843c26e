"""
Question Paper Assembly
generation/

Steps:
1. Validate      — per-type marks add up to the paper total, difficulty split adds up to 100%
2. Topic filter  — keep questions whose tags match a requested topic
3. Select        — per category (MCQ → short → long), fill easy/medium/hard buckets
                   with the highest-confidence unused questions
4. Package       — PaperOutput with section + marks per question, plus stats
"""
