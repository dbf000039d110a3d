"""Benchmark training, encoding and decoding on a slice of the Sci-Fi Gutenberg dataset.

Outputs one table row:
  Corpus Size | Vocab Size | Training Time | Encoding Throughput |
  Decoding Throughput | Chars per Token | Unknown Units
"""

import argparse
import logging
import time
from pathlib import Path

from datasets import load_dataset

from subtok import Tokenizer, disable_progress, from_pretrained

HF_DATASET = "stevez80/Sci-Fi-Books-gutenberg"

# Configure logging to show INFO level and above.
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%H:%M:%S",
)


def load_corpus(num_docs: int) -> list[str]:
    """Load the first `num_docs` documents via dataset indexing."""
    print(f"Loading {HF_DATASET} (non-streaming) …")
    ds = load_dataset(HF_DATASET, split="train")
    return ds[:num_docs]["text"]


def load_or_train(
    model_path: Path | None, train_text: str, vocab_size: int, pattern: str
) -> tuple[Tokenizer, float]:
    """Return (tokenizer, training_seconds), loading a JSON model when one exists."""
    if model_path and model_path.exists():
        print(f"Loaded model from {model_path}")
        return from_pretrained(model_path.read_text(encoding="utf-8")), 0.0
    print(f"Training new model (vocab_size={vocab_size:,}, pattern={pattern}) …")
    start = time.perf_counter()
    tok = Tokenizer.train(train_text, vocab_size, pattern, special_tokens=["<UNK>"])
    elapsed = time.perf_counter() - start
    if model_path:
        model_path.write_text(tok.to_json(), encoding="utf-8")
        print(f"Wrote model to {model_path}")
    return tok, elapsed


def main() -> None:
    """Run the benchmark and print a table row."""
    parser = argparse.ArgumentParser(description="Benchmark subtok train/encode/decode.")
    parser.add_argument(
        "--num-docs",
        type=int,
        default=20,
        help="Number of documents to use (default: 20; training rescans every round).",
    )
    parser.add_argument(
        "--vocab-size",
        type=int,
        default=1_000,
        help="Vocab size for training (default: 1,000).",
    )
    parser.add_argument(
        "--pattern",
        type=str,
        default="gpt2",
        help="Split preset name (default: gpt2).",
    )
    parser.add_argument(
        "--model",
        type=str,
        default=None,
        help="Optional JSON model path; loaded if present, written after training otherwise.",
    )
    parser.add_argument("--workers", type=int, default=None, help="Encoding threads.")
    args = parser.parse_args()

    disable_progress()

    docs = load_corpus(args.num_docs)
    if not docs:
        raise RuntimeError("No documents loaded from dataset.")

    total_chars = sum(len(d) for d in docs)
    train_text = "".join(docs)
    model_path = Path(args.model) if args.model else None
    tokenizer, train_secs = load_or_train(
        model_path, train_text, args.vocab_size, args.pattern
    )

    # --- Encoding ---
    t0 = time.perf_counter()
    encoded = tokenizer.encode_batch(docs, num_workers=args.workers)
    encode_elapsed = time.perf_counter() - t0
    encode_kcps = total_chars / encode_elapsed / 1_000

    # --- Decoding ---
    ids = [[tok.id for tok in seq] for seq in encoded]
    t0 = time.perf_counter()
    tokenizer.decode_batch(ids)
    decode_elapsed = time.perf_counter() - t0
    total_tokens = sum(len(seq) for seq in encoded)
    decode_ktps = total_tokens / decode_elapsed / 1_000

    # --- Compression stats (only characters kept by the split pattern) ---
    kept_chars = sum(len(tok.value) for seq in encoded for tok in seq)
    chars_per_token = kept_chars / total_tokens
    unknown = sum(1 for seq in encoded for tok in seq if tok.id == tokenizer.encoder.unknown_id)

    # Training time: display as mins if >= 60 s, else as secs.
    if train_secs >= 60:
        train_str = f"{train_secs / 60:.2f} mins"
    else:
        train_str = f"{train_secs:.1f} secs"

    # --- Output ---
    print()
    header = (
        f"| {'Corpus Size':16} | {'Vocab Size':10} | {'Training Time':14} "
        f"| {'Encoding Throughput':22} | {'Decoding Throughput':22} "
        f"| {'Chars per Token':15} | {'Unknown Units':13} |"
    )
    sep = (
        f"| {'-' * 16} | {'-' * 10} | {'-' * 14} "
        f"| {'-' * 22} | {'-' * 22} "
        f"| {'-' * 15} | {'-' * 13} |"
    )
    row = (
        f"| {f'{total_chars:,} chars':16} | {tokenizer.vocab_size():10,} | {train_str:14} "
        f"| {f'{encode_kcps:.1f}K chars/sec':22} | {f'{decode_ktps:.1f}K tokens/sec':22} "
        f"| {f'{chars_per_token:.2f}':15} | {unknown:13,} |"
    )
    print(header)
    print(sep)
    print(row)
    print()


if __name__ == "__main__":
    main()
