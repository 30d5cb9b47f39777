from haversine_fixture import ChaCha8Rng, generate_entries


def main() -> None:
    rng = ChaCha8Rng.seed_from_u64(2)
    result = generate_entries(rng, 8)

    print("Clusters")
    print("--------")
    for c in result.clusters:
        print(f"({c.p1.x:.6f}, {c.p1.y:.6f}) - ({c.p2.x:.6f}, {c.p2.y:.6f})")

    print("\nPairs")
    print("-----")
    for x0, y0, x1, y1 in result.pairs.tolist():
        print(f"{x0:.6f} {y0:.6f} -> {x1:.6f} {y1:.6f}")

    print(f"\nExpected sum: {result.expected_sum}")
    print(f"N: {result.count}")


if __name__ == "__main__":
    main()
