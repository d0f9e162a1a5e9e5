"""TypeScript contract generation and Rust type and serialization emitters."""